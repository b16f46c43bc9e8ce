"""
Customers module.

Scope:
- Customers CRUD (list + create + detail + update + delete)
- Email is unique across all customers (enforced by the database constraint)
- Hobbies stored as JSON text, encoded/decoded in this module only
"""
