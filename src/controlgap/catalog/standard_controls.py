"""Seed catalog of standard controls.

Organized by domain. Entries carry no database id; ``db seed`` assigns one
when loading them.
"""

from controlgap.models.controls import ControlType, DomainTag, StandardControlSpec
from controlgap.models.profile import ProfileTag
from controlgap.models.rules import ALWAYS, MaturityProfileRule, OrgFlag, OrgFlagRule

_SYSTEM_ENABLED = MaturityProfileRule(
    tags=frozenset({ProfileTag.ERP_ENABLED, ProfileTag.AUTOMATED})
)
_CENTRALIZED = MaturityProfileRule(tags=frozenset({ProfileTag.CENTRALIZED}))
_REGULATED = OrgFlagRule(flag=OrgFlag.REGULATED)


def _control(
    name: str,
    objective: str,
    control_type: ControlType,
    domain: DomainTag,
    frequency: str,
    evidence: str,
    rule=ALWAYS,
) -> StandardControlSpec:
    return StandardControlSpec(
        control_name=name,
        control_objective=objective,
        control_type=control_type,
        domain_tag=domain,
        typical_frequency=frequency,
        typical_evidence=evidence,
        rule=rule,
    )


P, D, C = ControlType.PREVENTIVE, ControlType.DETECTIVE, ControlType.CORRECTIVE

STANDARD_CONTROLS: list[StandardControlSpec] = [
    # Operations
    _control(
        "Segregation of Duties - Transaction Initiation and Approval",
        "Prevent unauthorized transactions by ensuring different individuals "
        "initiate and approve transactions",
        P, DomainTag.OPS, "continuous",
        "System access logs, approval workflows, user role matrices",
        _SYSTEM_ENABLED,
    ),
    _control(
        "Access Control - Logical Access to Critical Systems",
        "Ensure only authorized personnel have access to critical systems and data",
        P, DomainTag.OPS, "continuous",
        "Access control lists, user access reviews, provisioning/de-provisioning logs",
    ),
    _control(
        "Change Management - System Configuration Changes",
        "Ensure all system changes are authorized, tested, and documented",
        P, DomainTag.OPS, "per change",
        "Change tickets, approval records, test results, deployment logs",
        _SYSTEM_ENABLED,
    ),
    _control(
        "Data Backup and Recovery",
        "Ensure critical data can be recovered in case of system failure or data loss",
        C, DomainTag.OPS, "daily",
        "Backup logs, recovery test results, backup retention policies",
    ),
    _control(
        "Reconciliation - Key Account Balances",
        "Detect and correct discrepancies between systems and source data",
        D, DomainTag.OPS, "monthly",
        "Reconciliation workpapers, variance analysis, sign-offs",
    ),
    _control(
        "Approval Workflow - High-Value Transactions",
        "Ensure high-value or high-risk transactions receive appropriate management approval",
        P, DomainTag.OPS, "per transaction",
        "Approval records, delegation of authority matrix, transaction logs",
    ),
    _control(
        "Monitoring - Exception Reports Review",
        "Identify and investigate unusual transactions or system exceptions",
        D, DomainTag.OPS, "weekly",
        "Exception reports, investigation notes, resolution tracking",
    ),
    _control(
        "Physical Security - Access to Data Centers",
        "Prevent unauthorized physical access to critical infrastructure",
        P, DomainTag.OPS, "continuous",
        "Badge access logs, visitor logs, security camera footage",
        _CENTRALIZED,
    ),
    # Reporting
    _control(
        "Data Validation - Input Controls",
        "Ensure data entered into systems is complete, accurate, and valid",
        P, DomainTag.REPORTING, "continuous",
        "System validation rules, error logs, data quality reports",
    ),
    _control(
        "Management Review - Financial Reports",
        "Ensure financial reports are reviewed for accuracy and completeness before distribution",
        D, DomainTag.REPORTING, "monthly",
        "Review sign-offs, variance analysis, management comments",
    ),
    _control(
        "Cut-off Procedures - Period-End Transactions",
        "Ensure transactions are recorded in the correct accounting period",
        P, DomainTag.REPORTING, "monthly",
        "Cut-off checklists, transaction date analysis, period-end procedures",
    ),
    _control(
        "Disclosure Review - Financial Statement Footnotes",
        "Ensure all required disclosures are complete and accurate",
        D, DomainTag.REPORTING, "quarterly",
        "Disclosure checklists, review memos, management sign-offs",
        _REGULATED,
    ),
    _control(
        "Journal Entry Review - Non-Standard Entries",
        "Detect and prevent inappropriate or unauthorized journal entries",
        D, DomainTag.REPORTING, "monthly",
        "Journal entry reports, review notes, approval records",
    ),
    _control(
        "System-Generated Reports Validation",
        "Ensure automated reports produce accurate and complete information",
        D, DomainTag.REPORTING, "quarterly",
        "Report validation tests, reconciliations to source data, sign-offs",
        _SYSTEM_ENABLED,
    ),
    # Financial
    _control(
        "Cash Management - Bank Reconciliations",
        "Ensure bank balances agree with general ledger and identify discrepancies",
        D, DomainTag.FINANCIAL, "monthly",
        "Bank reconciliations, variance explanations, preparer/reviewer sign-offs",
    ),
    _control(
        "Fixed Assets - Physical Verification",
        "Verify existence and condition of fixed assets",
        D, DomainTag.FINANCIAL, "annual",
        "Physical count sheets, variance reports, asset register updates",
    ),
    _control(
        "Revenue Recognition - Contract Review",
        "Ensure revenue is recognized in accordance with accounting standards",
        P, DomainTag.FINANCIAL, "per contract",
        "Contract review memos, revenue recognition analysis, "
        "accounting policy documentation",
        _REGULATED,
    ),
    _control(
        "Accounts Payable - Three-Way Match",
        "Prevent payment for goods/services not received or authorized",
        P, DomainTag.FINANCIAL, "per invoice",
        "Purchase orders, receiving reports, invoices, match exception reports",
    ),
    _control(
        "Inventory - Cycle Counts",
        "Ensure inventory records are accurate and identify shrinkage",
        D, DomainTag.FINANCIAL, "monthly",
        "Cycle count sheets, variance reports, inventory adjustments",
        OrgFlagRule(flag=OrgFlag.INVENTORY_HEAVY),
    ),
    _control(
        "Payroll - Time and Attendance Approval",
        "Ensure employees are paid only for time worked and approved",
        P, DomainTag.FINANCIAL, "per pay period",
        "Timesheet approvals, payroll registers, exception reports",
    ),
    _control(
        "Expense Reimbursement - Policy Compliance Review",
        "Ensure expense reimbursements comply with company policy",
        P, DomainTag.FINANCIAL, "per claim",
        "Expense reports, receipts, approval records, policy documentation",
    ),
    # Compliance
    _control(
        "Regulatory Monitoring - Changes in Laws and Regulations",
        "Ensure organization is aware of and responds to regulatory changes",
        D, DomainTag.COMPLIANCE, "quarterly",
        "Regulatory update summaries, impact assessments, action plans",
        _REGULATED,
    ),
    _control(
        "Training - Compliance and Ethics",
        "Ensure employees understand compliance requirements and ethical standards",
        P, DomainTag.COMPLIANCE, "annual",
        "Training records, completion certificates, training materials, assessments",
    ),
    _control(
        "Policy Attestation - Code of Conduct",
        "Ensure employees acknowledge and commit to following company policies",
        P, DomainTag.COMPLIANCE, "annual",
        "Attestation records, policy documents, acknowledgment forms",
    ),
    _control(
        "Whistleblower Hotline - Investigation Process",
        "Provide mechanism for reporting concerns and ensure proper investigation",
        D, DomainTag.COMPLIANCE, "continuous",
        "Hotline reports, investigation files, resolution tracking",
        _REGULATED,
    ),
    _control(
        "Vendor Due Diligence - Third-Party Risk Assessment",
        "Ensure third parties meet compliance and risk standards",
        P, DomainTag.COMPLIANCE, "per vendor",
        "Due diligence questionnaires, risk assessments, approval records",
        _REGULATED,
    ),
    _control(
        "Data Privacy - Personal Data Protection",
        "Ensure personal data is collected, processed, and stored in compliance "
        "with privacy laws",
        P, DomainTag.COMPLIANCE, "continuous",
        "Privacy policies, consent records, data processing agreements, "
        "privacy impact assessments",
        OrgFlagRule(flag=OrgFlag.DATA_INTENSIVE),
    ),
    _control(
        "Conflict of Interest - Disclosure and Review",
        "Identify and manage potential conflicts of interest",
        D, DomainTag.COMPLIANCE, "annual",
        "Disclosure forms, review memos, mitigation plans",
    ),
    # IT general controls
    _control(
        "Password Policy - Complexity and Rotation",
        "Ensure strong authentication practices to prevent unauthorized access",
        P, DomainTag.OPS, "continuous",
        "Password policy documentation, system configuration, compliance reports",
    ),
    _control(
        "Incident Response - Security Incident Management",
        "Ensure security incidents are detected, responded to, and resolved promptly",
        C, DomainTag.OPS, "per incident",
        "Incident tickets, response procedures, post-incident reviews",
    ),
    _control(
        "Vulnerability Management - Patch Management",
        "Ensure systems are protected against known vulnerabilities",
        P, DomainTag.OPS, "monthly",
        "Vulnerability scan reports, patch deployment logs, exception tracking",
    ),
    _control(
        "Business Continuity - Disaster Recovery Testing",
        "Ensure critical systems can be recovered within acceptable timeframes",
        C, DomainTag.OPS, "annual",
        "DR test plans, test results, lessons learned, plan updates",
        OrgFlagRule(flag=OrgFlag.HIGH_RISK),
    ),
]
