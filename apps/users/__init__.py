"""Users app package.

Defines the custom user model carrying the club role (admin, board
member, standard member, observer). Registration, password handling and
token issuance belong to the external auth service; this app only
stores the identity the reservation engine trusts. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout the
project.
"""
