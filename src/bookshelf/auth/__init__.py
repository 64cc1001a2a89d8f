"""Authentication.

Learn: Users → username/password → one JWT (24h). The JWT is sent back
as "Authorization: Bearer <token>" and resolves to a CurrentIdentity
that every record query is scoped by.
"""
