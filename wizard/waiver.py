"""Waiver generator — legal undertaking text bound to the applicant and the date.

`generate` is pure.  `agreement_patch` builds the one atomic patch that the
agreement checkbox applies; the waiver fields are never written piecemeal.
"""

from datetime import date
from typing import Any, Dict, Optional

from config import LGU_NAME, LGU_PROVINCE, WAIVER_TYPE

NAME_PARTS = ("first_name", "middle_name", "last_name", "suffix_name")

# Written only through agreement_patch, always together
WAIVER_FIELDS = ("waiver_status", "waiver_name", "waiver_type", "content", "waiver_agreement")

WAIVER_TEMPLATE = (
    "I, {name}, of legal age, and business registrant of the City of {lgu}, undertake to comply "
    "with all statutory and regulatory requirements necessary to my license/permit application both "
    "on prerequisite and post inspection bases. I hereby authorize access to the premises of my "
    "establishment for city inspector/s to conduct the incidental/mandatory ocular inspection "
    "pursuant to law/ordinance.\n\n"
    "Likewise, I declare under penalty of perjury, that all information declared in this application "
    "are true and correct to the best of my personal knowledge and hereby attest to the authenticity "
    "of all the attached documents. I also acknowledge that all personal data and account transaction "
    "information records with the City of {lgu} may be processed, profiled or shared to requesting "
    "parties or for the purpose of any court, legal process examination/inquiry/investigation of any "
    "legal authority consistent and within the limits of the provisions of Data Privacy Act of 2012 "
    "and its Implementing Rules and Regulations.\n\n"
    "Accordingly, I hereby recognize the right of the City of {lgu} to issue suspension or revocation "
    "of my permit/license or execute foreclosure after due process in case of non-compliance on my "
    "part of any requirement, refusal to be inspected, and violation of pertinent law or any of the "
    "terms and conditions of my permit/license.\n\n"
    "IN WITNESS WHEREOF, I have hereunto set my hand this {when} at City of {lgu}, {province}, Philippines."
)


def ordinal_suffix(n: int) -> str:
    if 10 < n % 100 < 14:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def format_waiver_date(as_of: date) -> str:
    """'2nd day of November, 2025'."""
    return f"{as_of.day}{ordinal_suffix(as_of.day)} day of {as_of.strftime('%B')}, {as_of.year}"


def applicant_full_name(record: Dict[str, Any]) -> str:
    parts = [str(record.get(p) or "").strip() for p in NAME_PARTS]
    return " ".join(p for p in parts if p)


def generate(full_name: str, as_of: date) -> str:
    return WAIVER_TEMPLATE.format(
        name=full_name.strip(),
        when=format_waiver_date(as_of),
        lgu=LGU_NAME,
        province=LGU_PROVINCE,
    )


def agreement_patch(record: Dict[str, Any], agreed: bool, as_of: Optional[date] = None) -> Dict[str, Any]:
    """The complete set of field writes for flipping the agreement checkbox."""
    if not agreed:
        return {
            "agreed_to_terms": False,
            "waiver_status": False,
            "waiver_name": "",
            "waiver_type": "",
            "content": "",
            "waiver_agreement": False,
        }

    name = applicant_full_name(record)
    return {
        "agreed_to_terms": True,
        "waiver_status": True,
        "waiver_name": name,
        "waiver_type": WAIVER_TYPE,
        "content": generate(name, as_of or date.today()),
        "waiver_agreement": True,
    }
