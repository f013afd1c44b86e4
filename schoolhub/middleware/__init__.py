from schoolhub.middleware.audit_log import AuditLogMiddleware, drain_pending_audit_writes
from schoolhub.middleware.request_id import RequestIDMiddleware

__all__ = ["AuditLogMiddleware", "RequestIDMiddleware", "drain_pending_audit_writes"]
