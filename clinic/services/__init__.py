"""
Use cases for the clinic record store.

Each service module orchestrates the domain records and codec to implement
business rules (allocate ids, check references, move appointment status).

Collaborators (CLI, UI bridges) should call ClinicAPI instead of touching the
collections or the text blobs directly.
"""
