"""
Use Cases

Organized into domain folders:
- auth/: Login and first-run setup
- users/: User and site membership administration
- invitations/: Invitation lifecycle
- password_resets/: Admin-issued password resets

Import from the subdirectories.
"""
