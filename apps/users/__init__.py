"""Users app package.

Defines the resident profile model with its role (resident or admin) and
the profile API. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
