from .models import CertificateStatus

STATUS_COLORS = {
    CertificateStatus.PENDING_APPROVAL: "orange",
    CertificateStatus.APPROVED: "green",
    CertificateStatus.ISSUED: "blue",
    CertificateStatus.REJECTED: "red",
    CertificateStatus.REVOKED: "gray",
}

CERTIFICATE_DESCRIPTIONS = {
    "advanced_ev_fundamentals": (
        "Validates comprehensive knowledge of advanced electric vehicle fundamentals, "
        "including powertrain systems, energy management, and performance optimization."
    ),
    "battery_systems_expert": (
        "Validates expertise in battery technology, thermal management, state estimation, "
        "and advanced battery management systems for electric vehicles."
    ),
    "charging_infrastructure_specialist": (
        "Validates specialized knowledge of EV charging infrastructure, including AC/DC "
        "charging, grid integration, and charging network management."
    ),
    "motor_control_advanced": (
        "Validates advanced skills in electric motor control, inverter technology, and "
        "drive system optimization for electric vehicles."
    ),
    "diagnostics_expert": (
        "Validates expert-level diagnostic capabilities for electric vehicle systems, "
        "troubleshooting, and advanced repair techniques."
    ),
}


def status_color(status):
    return STATUS_COLORS.get(status, "gray")


def certificate_description(certificate_type):
    return CERTIFICATE_DESCRIPTIONS.get(certificate_type, "")
