"""
I/O schemas for API requests and responses.

Modules:
- auth: registration, login and account schemas
- projects: projects, files, reports and pipeline results
- billing: subscriptions, coupons, credits and policies
- content: pricing plans, prompts, announcements, banners, inquiries, sample
  reports, the service introduction and legal documents
- knowledge: chatbot messages and knowledge-base entries
- admin: admin-only user, project and revenue views
"""
