"""Users app package.

This module initializes the users app. It defines a custom user model
with client, provider and admin roles. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project.
"""
