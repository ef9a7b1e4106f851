"""Core domain: levels, models, carriers and the enriching handler."""
