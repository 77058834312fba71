"""
Course Mailer Backend - REST API for course registration mail-outs

This package provides a FastAPI-based web service that accepts a course
registration form and emails the registrant the PDF for their chosen
specialization. It enables:

- Validation of registration submissions (name, email, specialization)
- Resolution of a specialization to its course PDF
- Delivery of the PDF as an attachment over authenticated SMTP
- A plain-text health check for uptime monitors

The backend keeps no state beyond a read-only specialization catalog; every
request is handled independently.

Key Components:
    - main: FastAPI application factory, routes and the console entry point
    - registration: The validate, resolve, send pipeline
    - validation: Ordered request validators
    - mailer: Message composition and the aiosmtplib transport
    - configuration: Settings and catalog loading
    - models: Pydantic request/response models and outcome tags
    - utils: Filesystem and filename helpers

Usage:
    Run the API server with:
        course-mailer

    Or through uvicorn directly:
        uvicorn course_mailer_backend.main:create_app --factory --port 3000

    GMAIL_USER and GMAIL_PASS must be set (or present in a .env file).
"""
