"""
Storefront Email Package.

Modules:
- client: EmailClient for handing transactional emails to the email gateway
"""
