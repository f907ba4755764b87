"""Services module.

Services:
- users.py: Credential storage, password hashing and profile updates
- auth.py: JWT issuing and verification
- tasks.py: Task CRUD, filtering, sorting and aggregate counts
"""
