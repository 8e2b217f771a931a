"""Events app package.

Parties organised by clients, the quotes (event services) requested from
providers and the cart that persists the client's selection as a draft
party.
"""
