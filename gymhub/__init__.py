"""GymHub request lifecycle service.

Approval workflows (gym registration, instructor applications, collaboration
requests, payment confirmations) and the notification feed that reports on them.
"""
