# =============================================================================
# Worker Provisioning Service - Package Initialization
# =============================================================================
"""
Worker Provisioning Service

Callable endpoint that lets a signed-in customer provision a worker account:
a Firebase Auth user plus matching worker and user profiles in Firestore.
"""

__version__ = "1.0.0"
