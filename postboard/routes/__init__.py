# Routes package init
"""
Postboard — API Routes Package
================================

Route Inventory:
    - posts.py:       /api/posts            (CRUD, pagination, likes)
    - comments.py:    /api/comments         (CRUD on comments)
    - users.py:       /api/users            (profiles, count)
    - categories.py:  /api/categories       (admin-managed categories)
    - auth.py:        /api/auth             (register, login)
    - health.py:      GET /health           (service health check)

Routes stay THIN: guards run as dependencies, handlers call one service
method and return its response model. Business logic belongs in services.
"""
