# Services package init
"""
Journey Backend — Services Layer
=================================

What:  Business logic between routes (HTTP) and persistence.

Service Inventory:
    - TripStore (abstract) / SqlTripStore: all reads and writes
    - Mailer (abstract) / SmtpMailer: owner confirmation email
    - BackgroundDispatcher: detached fire-and-forget tasks
    - TripService: transactional trip creation + email scheduling
    - ParticipantService: participant confirmation state machine

Why capabilities are abstract:
    The services receive a TripStore and a Mailer at construction time, so
    tests swap in in-memory doubles and production wires the SQL/SMTP ones.
"""
