"""
Mounjaro Tracker Backend — Services Package
=============================================

Business logic over the ORM models. Services take the AsyncSession as an
argument and never commit; the request-scoped session commits or rolls
back as a unit.
"""
