"""
Slips App - Weighbridge Slip Lifecycle

A slip records one weighbridge transaction: the loaded vehicle is weighed
(gross weight), later the empty vehicle is weighed (tare weight), and the
net weight is derived from the two.

Key Features:
- Sequential, zero-padded slip numbers ("00001", "00002", ...)
- Pending -> Complete transition exactly once, never reverted
- Net weight derived at completion and immutable afterwards
- JSON file or database persistence behind one repository interface
- Two-copy print slip (Customer Copy / Office Copy)

Architecture:
- Domain: PendingSlip, CompleteSlip (frozen dataclasses)
- Store: SlipStore (single writer, lock-serialized)
- Repositories: JsonFileSlipRepository, DatabaseSlipRepository
- Views: RESTful API on top of the store
- Exceptions: Domain failure taxonomy mapped to API errors
"""
