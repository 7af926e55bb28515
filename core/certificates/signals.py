from django.dispatch import Signal

# Sent after a status change is committed.
# Arguments: certificate, action, previous_status, actor
certificate_transitioned = Signal()
