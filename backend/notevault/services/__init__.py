"""Services Layer — the imperative shell around core/.

Invariants:
    - Services orchestrate IO (storage, clock) around pure core decisions
    - Services raise NoteVaultError subclasses; they never build HTTP responses
"""
