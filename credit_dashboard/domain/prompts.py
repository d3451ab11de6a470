"""Prompt templates for the AI narrative endpoints and reports

Every builder returns a (system_prompt, user_prompt) pair. Builders only
format data; they never call the model.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from credit_dashboard.domain.exceptions import UnknownReportTypeError
from credit_dashboard.domain.metrics import credit_grade_distribution, summarize_recommendations
from credit_dashboard.domain.models import (
    CreditHistoryEntry,
    CreditMetrics,
    LoanRecommendation,
    UserCreditProfile,
)

Prompt = Tuple[str, str]


@dataclass
class ReportData:
    """Inputs quoted by the portfolio reports"""

    users: Sequence[UserCreditProfile]
    metrics: CreditMetrics
    recommendations: Sequence[LoanRecommendation]


def format_money(value: float) -> str:
    if float(value).is_integer():
        return f"${value:,.0f}"
    return f"${value:,.2f}"


def format_percent(ratio: float) -> str:
    """0.345 -> '34.5%'"""
    return f"{ratio * 100:.1f}%"


def format_date(entry: CreditHistoryEntry) -> str:
    return f"{entry.date.month}/{entry.date.day}/{entry.date.year}"


def format_payments(user: UserCreditProfile) -> str:
    p = user.payment_history
    return f"{p.on_time} on-time, {p.late} late, {p.missed} missed"


def format_amount(recommendation: LoanRecommendation) -> str:
    if recommendation.recommended_amount:
        return format_money(recommendation.recommended_amount)
    return "N/A"


def _lines(items: Iterable[str]) -> str:
    return "\n".join(items)


def profile_generation_prompt(count: int) -> str:
    return f"""Generate exactly {count} realistic credit user profiles as a valid JSON array. Each profile must be a JSON object with these exact fields:
{{
  "id": "string (unique identifier)",
  "name": "string (full name)",
  "email": "string (email address)",
  "currentCreditScore": number (300-850),
  "creditHistory": [array of 12-24 objects with: {{"date": "ISO string", "creditScore": number, "paymentStatus": "on-time"|"late"|"missed", "amount": number, "event": "string"}}],
  "debtToIncomeRatio": number (0.1-0.8),
  "totalDebt": number (10000-200000),
  "monthlyIncome": number (3000-15000),
  "paymentHistory": {{"onTime": number, "late": number, "missed": number}},
  "accountAge": number (6-120),
  "creditUtilization": number (10-90),
  "riskLevel": "low"|"medium"|"high",
  "status": "active"|"inactive"|"flagged",
  "lastUpdated": "ISO date string"
}}

CRITICAL: Return ONLY valid JSON array format. No markdown, no code blocks, no explanations. Start with [ and end with ]. All strings must use double quotes. All numbers must be actual numbers, not strings."""


def analysis_prompt(user: UserCreditProfile) -> Prompt:
    system = """You are a financial analyst expert specializing in credit risk assessment.
Provide detailed, professional analysis of credit profiles. Be specific, data-driven, and actionable."""

    history = _lines(
        f"- {format_date(h)}: Score {h.credit_score}, Payment: {h.payment_status}, Amount: {format_money(h.amount)}"
        for h in user.credit_history[-6:]
    )

    prompt = f"""Analyze the following credit profile and provide a comprehensive financial analysis:

**User Information:**
- Name: {user.name}
- Current Credit Score: {user.current_credit_score}
- Debt-to-Income Ratio: {format_percent(user.debt_to_income_ratio)}
- Total Debt: {format_money(user.total_debt)}
- Monthly Income: {format_money(user.monthly_income)}
- Credit Utilization: {user.credit_utilization}%
- Account Age: {user.account_age} months
- Risk Level: {user.risk_level}

**Payment History:**
- On-Time Payments: {user.payment_history.on_time}
- Late Payments: {user.payment_history.late}
- Missed Payments: {user.payment_history.missed}

**Recent Credit History (last 6 months):**
{history}

Provide a detailed analysis covering:
1. Overall credit health assessment
2. Key strengths and weaknesses
3. Risk factors and concerns
4. Credit score trend analysis
5. Payment behavior patterns
6. Debt management evaluation

Format your response in clear paragraphs with specific insights."""
    return system, prompt


def advice_prompt(user: UserCreditProfile, recommendation: LoanRecommendation) -> Prompt:
    system = """You are a certified financial advisor providing personalized, actionable advice to help users improve their credit and financial health.
Give practical, specific recommendations that users can implement."""

    prompt = f"""Based on the following credit profile and loan recommendation, provide personalized financial advice:

**Credit Profile:**
- Credit Score: {user.current_credit_score}
- Debt-to-Income Ratio: {format_percent(user.debt_to_income_ratio)}
- Total Debt: {format_money(user.total_debt)}
- Monthly Income: {format_money(user.monthly_income)}
- Credit Utilization: {user.credit_utilization}%
- Payment History: {format_payments(user)}

**Loan Recommendation:**
- Status: {recommendation.recommendation}
- Recommended Amount: {format_amount(recommendation)}
- Confidence: {recommendation.confidence}%
- Risk Factors: {", ".join(recommendation.risk_factors)}

Provide actionable financial advice covering:
1. Immediate actions to improve credit score
2. Debt reduction strategies
3. Payment improvement recommendations
4. Credit utilization optimization
5. Long-term financial health goals
6. Specific steps based on the loan recommendation status

Make the advice specific, measurable, and prioritized."""
    return system, prompt


def risk_explanation_prompt(user: UserCreditProfile, risk_factors: Sequence[str]) -> Prompt:
    system = """You are a financial educator explaining credit risk factors in simple, understandable terms.
Help users understand why certain factors affect their creditworthiness."""

    factors = _lines(f"{i}. {factor}" for i, factor in enumerate(risk_factors, start=1))

    prompt = f"""Explain the following risk factors for this credit profile in plain language:

**User Profile:**
- Credit Score: {user.current_credit_score}
- Debt-to-Income: {format_percent(user.debt_to_income_ratio)}
- Credit Utilization: {user.credit_utilization}%
- Payment History: {format_payments(user)}

**Risk Factors Identified:**
{factors}

For each risk factor, explain:
1. What it means in simple terms
2. Why it's a concern
3. How it impacts creditworthiness
4. The specific impact on this user's profile

Use clear, non-technical language that anyone can understand."""
    return system, prompt


def trend_prediction_prompt(user: UserCreditProfile) -> Prompt:
    system = """You are a financial analyst specializing in credit score forecasting.
Analyze historical patterns and predict future credit trends based on current behavior."""

    history = _lines(
        f"{format_date(h)}: {h.credit_score} ({h.payment_status})" for h in user.credit_history[-12:]
    )

    prompt = f"""Based on the following credit history, predict the likely credit score trend over the next 6-12 months:

**Current Status:**
- Current Credit Score: {user.current_credit_score}
- Credit Score History (last 12 months):
{history}

**Financial Behavior:**
- Debt-to-Income Ratio: {format_percent(user.debt_to_income_ratio)}
- Credit Utilization: {user.credit_utilization}%
- Payment Pattern: {format_payments(user)}

Provide:
1. Predicted credit score range for 3, 6, and 12 months
2. Key factors that will influence the trend
3. Best-case and worst-case scenarios
4. Confidence level in the prediction
5. What changes in behavior could improve or worsen the trend

Be realistic and data-driven in your predictions."""
    return system, prompt


def anomaly_prompt(user: UserCreditProfile) -> Prompt:
    system = """You are a financial fraud and anomaly detection specialist.
Identify unusual patterns, potential red flags, or anomalies in credit behavior."""

    history = _lines(
        f"Date: {format_date(h)}, Score: {h.credit_score}, Payment: {h.payment_status}, Amount: {format_money(h.amount)}"
        for h in user.credit_history
    )

    prompt = f"""Analyze this credit profile for anomalies, unusual patterns, or potential concerns:

**Credit History:**
{history}

**Financial Metrics:**
- Credit Score: {user.current_credit_score}
- Debt-to-Income: {format_percent(user.debt_to_income_ratio)}
- Credit Utilization: {user.credit_utilization}%
- Payment History: {format_payments(user)}

Identify:
1. Unusual patterns in credit score changes
2. Inconsistent payment behavior
3. Sudden changes in debt levels
4. Anomalies in credit utilization
5. Any red flags that require investigation
6. Recommendations for further review

Be thorough but fair - distinguish between concerning anomalies and normal fluctuations."""
    return system, prompt


def chat_prompt(
    question: str,
    user: Optional[UserCreditProfile] = None,
    recommendation: Optional[LoanRecommendation] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Prompt:
    """
    Assistant prompt for a free-form question.

    A user profile (optionally with its recommendation) is quoted as
    structured context; otherwise any generic context is appended as JSON.
    """
    system = """You are a financial AI assistant specializing in credit analysis and loan recommendations.
You help users understand their credit profiles, answer questions about credit scores, debt management, and financial health.
Be concise, accurate, and helpful. Use the provided context to answer questions about specific users when available."""

    context_text = ""
    if user is not None:
        context_text = f"""

**User Profile Context:**
- Name: {user.name}
- Credit Score: {user.current_credit_score}
- Debt-to-Income Ratio: {format_percent(user.debt_to_income_ratio)}
- Total Debt: {format_money(user.total_debt)}
- Monthly Income: {format_money(user.monthly_income)}
- Credit Utilization: {user.credit_utilization}%
- Account Age: {user.account_age} months
- Risk Level: {user.risk_level}
- Status: {user.status}
- Payment History: {format_payments(user)}
- Credit History Entries: {len(user.credit_history)} records"""

        if recommendation is not None:
            context_text += f"""

**Loan Recommendation:**
- Status: {recommendation.recommendation}
- Recommended Amount: {format_amount(recommendation)}
- Confidence: {recommendation.confidence}%
- Risk Factors: {", ".join(recommendation.risk_factors) or "N/A"}
- Reasoning: {"; ".join(recommendation.reasoning) or "N/A"}"""
    elif context:
        context_text = f"\n\n**Context Data:**\n{json.dumps(context, indent=2, default=str)}"

    return system, f"{question}{context_text}"


def _breakdown_lines(data: ReportData) -> str:
    breakdown = summarize_recommendations(data.recommendations)
    return f"""- Approved: {breakdown.approved}
- Conditional: {breakdown.conditional}
- Rejected: {breakdown.rejected}"""


def credit_score_report_prompt(data: ReportData) -> Prompt:
    system = """You are a senior financial analyst creating comprehensive credit score reports for financial institutions.
Generate professional, detailed reports that can be used for financial decision-making, regulatory compliance, and strategic planning."""

    metrics = data.metrics
    risk = metrics.risk_distribution
    sample = list(data.users[:10])
    users = "\n".join(
        f"""
User {i}:
- Name: {u.name}
- Credit Score: {u.current_credit_score}
- Risk Level: {u.risk_level}
- Debt-to-Income: {format_percent(u.debt_to_income_ratio)}
- Status: {u.status}
"""
        for i, u in enumerate(sample, start=1)
    )

    prompt = f"""Generate a comprehensive Credit Score Analysis Report based on the following data:

**Portfolio Overview:**
- Total Users: {metrics.total_users}
- Average Credit Score: {metrics.average_credit_score}
- Approval Rate: {metrics.approval_rate}%
- Risk Distribution: {risk.low} Low, {risk.medium} Medium, {risk.high} High Risk
- Average Debt-to-Income Ratio: {format_percent(metrics.average_debt_to_income)}

**Sample User Data ({len(sample)} users):**
{users}

**Recommendations Summary:**
{_breakdown_lines(data)}

Create a professional financial report with the following sections:
1. Executive Summary
2. Portfolio Performance Analysis
3. Credit Score Distribution & Trends
4. Risk Assessment & Categorization
5. Key Financial Metrics
6. Recommendations for Financial Actions
7. Risk Mitigation Strategies
8. Compliance & Regulatory Considerations
9. Strategic Recommendations

Format the report in clear sections with actionable insights that financial institutions can use for:
- Loan approval decisions
- Credit limit adjustments
- Risk management
- Regulatory reporting
- Strategic planning

Use professional financial terminology and provide specific, data-driven recommendations."""
    return system, prompt


def risk_assessment_report_prompt(data: ReportData) -> Prompt:
    system = """You are a risk management expert creating detailed risk assessment reports for financial institutions.
Generate comprehensive risk analysis reports that help companies make informed financial decisions and comply with regulatory requirements."""

    metrics = data.metrics
    risk = metrics.risk_distribution
    high_risk = [u for u in data.users if u.risk_level == "high"][:10]
    users = "\n".join(
        f"""
High-Risk User {i}:
- Name: {u.name}
- Credit Score: {u.current_credit_score}
- Debt-to-Income: {format_percent(u.debt_to_income_ratio)}
- Payment History: {format_payments(u)}
- Credit Utilization: {u.credit_utilization}%
- Total Debt: {format_money(u.total_debt)}
"""
        for i, u in enumerate(high_risk, start=1)
    )

    prompt = f"""Generate a comprehensive Risk Assessment Report based on the following credit portfolio data:

**Portfolio Statistics:**
- Total Users: {metrics.total_users}
- Average Credit Score: {metrics.average_credit_score}
- Risk Distribution:
  * Low Risk: {risk.low} users
  * Medium Risk: {risk.medium} users
  * High Risk: {risk.high} users

**High-Risk Users Analysis:**
{users}

**Loan Recommendations:**
{_breakdown_lines(data)}

Create a professional risk assessment report with the following sections:
1. Executive Summary & Risk Overview
2. Portfolio Risk Analysis
3. High-Risk User Identification & Analysis
4. Risk Factors & Root Causes
5. Credit Risk Scoring Methodology
6. Default Probability Assessment
7. Risk Mitigation Strategies
8. Recommended Financial Actions
9. Regulatory Compliance Considerations
10. Action Items & Next Steps

Provide specific recommendations for:
- Credit limit adjustments
- Loan approval/rejection decisions
- Collection strategies
- Risk monitoring protocols
- Portfolio diversification
- Regulatory reporting requirements

Use professional risk management terminology and provide actionable, data-driven recommendations."""
    return system, prompt


def financial_action_report_prompt(data: ReportData) -> Prompt:
    system = """You are a financial strategist creating actionable financial decision reports for credit institutions.
Generate reports that provide clear, actionable recommendations for financial operations, loan management, and business strategy."""

    metrics = data.metrics
    recommendations = "\n".join(
        f"""
Recommendation {i}:
- User: {r.user_name}
- Decision: {r.recommendation.upper()}
- Recommended Amount: {format_amount(r)}
- Confidence: {r.confidence}%
- Risk Factors: {", ".join(r.risk_factors)}
"""
        for i, r in enumerate(data.recommendations[:20], start=1)
    )
    grades = _lines(f"- {bucket.label}: {bucket.count}" for bucket in credit_grade_distribution(data.users))

    prompt = f"""Generate a comprehensive Financial Action Report based on the following credit portfolio data:

**Portfolio Overview:**
- Total Users: {metrics.total_users}
- Average Credit Score: {metrics.average_credit_score}
- Approval Rate: {metrics.approval_rate}%
- Total Portfolio Debt: {format_money(metrics.total_debt)}
- Average Debt-to-Income: {format_percent(metrics.average_debt_to_income)}

**Loan Recommendations Breakdown:**
{recommendations}

**User Credit Distribution:**
{grades}

Create a professional financial action report with the following sections:
1. Executive Summary & Key Recommendations
2. Portfolio Financial Health Assessment
3. Loan Approval Recommendations & Rationale
4. Credit Limit Adjustment Recommendations
5. Revenue Opportunities & Risk Assessment
6. Collection & Recovery Strategies
7. Portfolio Optimization Recommendations
8. Financial Impact Projections
9. Implementation Roadmap
10. Success Metrics & KPIs

Provide specific, actionable recommendations for:
- Which loans to approve/reject and why
- Credit limit increases/decreases
- Interest rate adjustments
- Collection priorities
- Portfolio growth strategies
- Risk management actions
- Revenue optimization opportunities

Include financial projections, risk assessments, and clear action items with timelines."""
    return system, prompt


REPORT_BUILDERS = {
    "credit-score": credit_score_report_prompt,
    "risk-assessment": risk_assessment_report_prompt,
    "financial-action": financial_action_report_prompt,
}


def report_prompt(report_type: str, data: ReportData) -> Prompt:
    """Dispatch to the builder for `report_type`"""
    try:
        builder = REPORT_BUILDERS[report_type]
    except KeyError:
        raise UnknownReportTypeError(f"Unknown report type: {report_type}") from None
    return builder(data)
