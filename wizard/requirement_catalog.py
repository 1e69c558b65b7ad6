"""Keyword catalog that suggests a requirement type/description from a file name."""

from typing import List, Tuple

# (keywords, type, description); first match wins, so narrower entries come first
CATALOG: List[Tuple[Tuple[str, ...], str, str]] = [
    # Business registration
    (("dti", "business", "registration"), "DTI Certificate",
     "Department of Trade and Industry Business Name Registration"),
    (("sec", "corporation", "articles"), "SEC Registration",
     "Securities and Exchange Commission Certificate of Registration"),
    (("cda", "cooperative"), "CDA Registration",
     "Cooperative Development Authority Certificate of Registration"),
    # BIR
    (("bir permit", "bir_permit", "bir-permit"), "BIR Permit",
     "BIR Authority to Print Receipts/Invoices"),
    (("bir", "2303", "certificate of registration"), "BIR Registration",
     "BIR Certificate of Registration (Form 2303)"),
    # Local government
    (("barangay", "clearance"), "Barangay Clearance", "Barangay Business Clearance"),
    (("mayor", "business permit", "municipal"), "Mayor's Permit", "Business Permit from Mayor's Office"),
    (("zoning", "locational"), "Zoning Clearance", "Zoning/Locational Clearance"),
    # Social security
    (("sss",), "SSS Registration", "Social Security System Certificate of Registration"),
    (("pagibig", "hdmf"), "Pag-IBIG Registration", "Pag-IBIG Fund Certificate of Registration"),
    (("philhealth", "phic"), "PhilHealth Registration", "Philippine Health Insurance Corporation Registration"),
    # Other regulatory
    (("fire", "safety", "fsic"), "Fire Safety Certificate", "Fire Safety Inspection Certificate"),
    (("sanitary", "health"), "Sanitary Permit", "Sanitary Permit from Health Office"),
    (("environment", "ecc"), "Environmental Compliance", "Environmental Compliance Certificate"),
    # Supporting
    (("cedula", "community tax"), "Community Tax Certificate", "Community Tax Certificate (Cedula)"),
    (("lease", "contract", "rental"), "Lease Contract", "Lease Agreement or Contract of the Business Location"),
    (("id", "identification", "passport", "driver", "umid", "postal"), "Valid ID",
     "Valid Government-Issued Identification Document"),
    (("photo", "picture"), "Business Photo", "Photo of Business Establishment"),
    # Economic zones
    (("peza",), "PEZA Registration", "Philippine Economic Zone Authority Registration"),
    (("boi", "board of investment"), "BOI Registration", "Board of Investments Registration"),
]

FALLBACK = ("Business Document", "Business Registration Document")


def suggest_requirement(filename: str) -> Tuple[str, str]:
    """Return (type, description) for an uploaded file name."""
    lowered = (filename or "").lower()
    for keywords, req_type, description in CATALOG:
        if any(k in lowered for k in keywords):
            return req_type, description
    return FALLBACK
