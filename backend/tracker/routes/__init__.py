"""
Mounjaro Tracker Backend — Routes Package
===========================================

Route Inventory:
    - auth.py:     POST /api/auth/login, /logout, /register,
                   /forgot-password, /reset-password; GET /api/auth/session
    - profile.py:  POST /api/onboarding/complete; GET, PUT /api/profile
    - push.py:     POST, DELETE /api/push/subscribe
    - pages.py:    "/" and the application pages (JSON placeholders)
    - health.py:   GET /health

Routes stay THIN: read the request, call a service or the verifier, shape
the response. API handlers authenticate with require_identity; page
handlers act on the verifier's DenyRedirect themselves.
"""
