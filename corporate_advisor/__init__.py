"""Corporate AI Advisor.

This package contains the backend of an AI-driven corporate consulting
service. Users register a company as a *project*, upload its documents, and
receive AI-generated analyses which can be turned into presentation decks.

High-level architecture
-----------------------

- ``corporate_advisor.core``:

  - Logging and Logfire monitoring configuration.
  - The SQLModel entities, async repositories and session management.
  - Domain enums, I/O schemas and the domain error hierarchy.

- ``corporate_advisor.ai``:

  - The Gemini client (model selection, file upload, text, grounded search
    and image generation) and slide JSON parsing.

- ``corporate_advisor.services``:

  - Business rules: quota policy, coupons, credits, subscriptions, the
    analysis pipeline, PDF assembly, blob storage and notifications.

- ``corporate_advisor.server``:

  - The FastAPI application, configuration, security and API routers.

Typical workflow
----------------

1. Create a ``Project`` (quota checked against the user's group policy).
2. Upload files into blob storage.
3. Run the risk analysis, then the grounded solution analysis.
4. Generate slides, slide images and the visual PDF report.
"""
