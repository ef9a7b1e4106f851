"""Carrier enrichment without a web framework.

Run with:
    python examples/basic_usage.py
"""

import logctx
from logctx import Carrier, Context, add_attributes, set_minimum_level

# Make the default logger honor carrier attributes and level overrides.
logctx.wrap_default()


def charge(ctx: Carrier, amount: int) -> None:
    logctx.debug(ctx, "contacting gateway")
    if amount > 100:
        logctx.error(ctx, "charge failed", ValueError("limit exceeded"), "amount", amount)
        return
    logctx.info(ctx, "charged", "amount", amount)


def main() -> None:
    ctx = add_attributes(Context.background(), "job", "billing", "run", 17)

    charge(ctx, 40)
    charge(ctx, 250)

    # Debug output for one customer only.
    noisy = set_minimum_level(add_attributes(ctx, "customer", "c-9"), logctx.DEBUG)
    charge(noisy, 10)


if __name__ == "__main__":
    main()
