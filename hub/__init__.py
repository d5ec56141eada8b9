"""
Tournament Hub - authorization and state layer for padel tournaments

Responsibilities:
- Access control (owner, managers)
- Tournament registry (creation, per-manager index, winners)
- Registration ledger (capacity, registration deadline)
- Forum and messaging (comments, follows, manager/player threads, post cooldown)
"""
