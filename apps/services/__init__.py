"""Services app package.

The provider catalogue: services, guest tiers, age pricing rules, date
surcharges and the pure pricing helpers shared by quotes and the cart.
"""
