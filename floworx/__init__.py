"""FloWorx team context - manager roles, supplier context and routing for the email classifier"""

from __future__ import annotations

__version__ = "1.0.0"
