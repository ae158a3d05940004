# Services package init
"""
Postboard — Services Layer
============================

What:  Business logic between routes (HTTP) and the database.
How:   Stateless service classes exposed as module singletons. Each method
       receives the request's AsyncSession (and the caller's Identity where
       ownership matters) and returns typed response models.

Service Inventory:
    - PostService:     posts, pagination, likes
    - CommentService:  comments on posts
    - UserService:     profiles and account removal
    - CategoryService: admin-managed categories
    - AuthService:     registration and login
    - retry:           tenacity policy for idempotent reads
"""
