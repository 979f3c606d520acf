"""
Mounjaro Tracker Backend — Security Package
=============================================

    route_table.py    path → access class (API, auth-only, protected, public)
    session_token.py  signed + encrypted session tokens
    passwords.py      bcrypt hashing off the event loop
    optimistic.py     token-only session reader for the edge gate
    verifier.py       data-bound session verification (Allowed / DenyRedirect)
    authenticator.py  email + password → identity
"""
