"""Reference litigation taxonomy: 9 stages, 44 substages, canonical coins.

These values are the single source of truth for payouts. The mobile client
renders the same ids but its coin numbers are display-only.
"""

from __future__ import annotations

UPLOAD = "upload"
DATA_ENTRY = "data_entry"
MILESTONE = "milestone"

LITIGATION_STAGES: list[dict] = [
    {
        "id": 1,
        "name": "Pre-Litigation",
        "coins": 100,
        "substages": [
            {"id": "pre-1", "name": "Police Report", "type": UPLOAD, "coins": 10},
            {"id": "pre-2", "name": "Body Cam Footage", "type": UPLOAD, "coins": 10},
            {"id": "pre-3", "name": "Dash Cam Footage", "type": UPLOAD, "coins": 10},
            {"id": "pre-4", "name": "Pictures", "type": UPLOAD, "coins": 5},
            {"id": "pre-5", "name": "Health Insurance Card", "type": UPLOAD, "coins": 5},
            {"id": "pre-6", "name": "Auto Insurance Company", "type": DATA_ENTRY, "coins": 5},
            {"id": "pre-7", "name": "Auto Insurance Policy Number", "type": DATA_ENTRY, "coins": 5},
            {"id": "pre-8", "name": "Medical Bills", "type": UPLOAD, "coins": 15},
            {"id": "pre-9", "name": "Medical Records", "type": UPLOAD, "coins": 35},
            {"id": "pre-10", "name": "Demand Sent", "type": UPLOAD, "coins": 15},
            {"id": "pre-11", "name": "Demand Rejected", "type": UPLOAD, "coins": 10},
        ],
    },
    {
        "id": 2,
        "name": "Complaint Filed",
        "coins": 32,
        "substages": [
            {"id": "cf-1", "name": "Draft Complaint", "type": MILESTONE, "coins": 8},
            {"id": "cf-2", "name": "File with Court", "type": MILESTONE, "coins": 10},
            {"id": "cf-3", "name": "Serve Defendant", "type": MILESTONE, "coins": 7},
            {"id": "cf-4", "name": "Answer Filed", "type": MILESTONE, "coins": 7},
        ],
    },
    {
        "id": 3,
        "name": "Discovery",
        "coins": 50,
        "substages": [
            {"id": "disc-1", "name": "Interrogatories", "type": MILESTONE, "coins": 10},
            {"id": "disc-2", "name": "Request for Production", "type": MILESTONE, "coins": 10},
            {"id": "disc-3", "name": "Depositions", "type": MILESTONE, "coins": 10},
            {"id": "disc-4", "name": "Request for Admissions", "type": MILESTONE, "coins": 10},
            {"id": "disc-5", "name": "Expert Disclosures", "type": MILESTONE, "coins": 10},
        ],
    },
    {
        "id": 4,
        "name": "Mediation",
        "coins": 25,
        "substages": [
            {"id": "med-1", "name": "Mediation Scheduled", "type": MILESTONE, "coins": 8},
            {"id": "med-2", "name": "Attend Mediation", "type": MILESTONE, "coins": 10},
            {"id": "med-3", "name": "Outcome Documented", "type": MILESTONE, "coins": 7},
        ],
    },
    {
        "id": 5,
        "name": "Pre-Trial",
        "coins": 40,
        "substages": [
            {"id": "pt-1", "name": "Prepare your Testimony", "type": MILESTONE, "coins": 25},
            {"id": "pt-2", "name": "Confirm Exhibits and Evidence", "type": MILESTONE, "coins": 20},
            {"id": "pt-3", "name": "Arrange to Miss Work", "type": MILESTONE, "coins": 15},
            {"id": "pt-4", "name": "Arrange Transportation", "type": MILESTONE, "coins": 15},
            {"id": "pt-5", "name": "Discuss Trial Strategy", "type": MILESTONE, "coins": 25},
        ],
    },
    {
        "id": 6,
        "name": "Trial",
        "coins": 60,
        "substages": [
            {"id": "tr-1", "name": "Jury Selection", "type": MILESTONE, "coins": 10},
            {"id": "tr-2", "name": "Opening Statements", "type": MILESTONE, "coins": 15},
            {"id": "tr-3", "name": "Plaintiff's Witness Testimony", "type": MILESTONE, "coins": 15},
            {"id": "tr-4", "name": "Plaintiff's Evidence", "type": MILESTONE, "coins": 15},
            {"id": "tr-5", "name": "Defense's Case", "type": MILESTONE, "coins": 15},
            {"id": "tr-6", "name": "Closing Arguments", "type": MILESTONE, "coins": 15},
            {"id": "tr-7", "name": "Jury Deliberations", "type": MILESTONE, "coins": 10},
        ],
    },
    {
        "id": 7,
        "name": "Verdict",
        "coins": 50,
        "substages": [
            {"id": "ver-1", "name": "Verdict Delivered", "type": MILESTONE, "coins": 20},
            {"id": "ver-2", "name": "Post-Trial Motions", "type": MILESTONE, "coins": 10},
            {"id": "ver-3", "name": "Judgment Entered", "type": MILESTONE, "coins": 20},
        ],
    },
    {
        "id": 8,
        "name": "Appeal",
        "coins": 30,
        "substages": [
            {"id": "app-1", "name": "Notice of Appeal", "type": MILESTONE, "coins": 10},
            {"id": "app-2", "name": "Appellate Briefs", "type": UPLOAD, "coins": 10},
            {"id": "app-3", "name": "Appellate Decision", "type": MILESTONE, "coins": 10},
        ],
    },
    {
        "id": 9,
        "name": "Case Resolution",
        "coins": 75,
        "substages": [
            {"id": "res-1", "name": "Settlement Statement", "type": UPLOAD, "coins": 10},
            {"id": "res-2", "name": "Client Disbursement", "type": MILESTONE, "coins": 15},
            {"id": "res-3", "name": "Case Closure", "type": MILESTONE, "coins": 30},
        ],
    },
]
