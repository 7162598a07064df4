"""
Deterministic fallback plan. Pure, no I/O, always schema-valid.
Returned whenever any step of the generative path fails.
"""


from romplan.llm.schemas import Phase, Plan, Task


def fallback_plan(need: str) -> Plan:
    return Plan(
        goal=f"Growth Plan for B2B Startup: {need}",
        phases=[
            Phase(
                title="Phase 1: Validate Market",
                tasks=[
                    Task(
                        task_id="V1",
                        title="Customer Interviews",
                        owner="CEO",
                        start_date="2025-11-10",
                        end_date="2025-11-20",
                        success_metric="20 interviews completed",
                        instruction="Schedule calls with potential customers to validate pain points.",
                        example="Use Calendly for booking; ask 'What frustrates you most in B2B sales?'",
                    ),
                    Task(
                        task_id="V2",
                        title="Competitor Analysis",
                        owner="Product Lead",
                        start_date="2025-11-15",
                        end_date="2025-11-25",
                        success_metric="SWOT report drafted",
                        instruction="Map competitors' features and pricing.",
                        example="Tools: SimilarWeb, G2 reviews; output Google Doc with gaps.",
                    ),
                ],
            ),
            Phase(
                title="Phase 2: Build MVP",
                tasks=[
                    Task(
                        task_id="B1",
                        title="Prototype Development",
                        owner="Dev Team",
                        start_date="2025-11-25",
                        end_date="2025-12-10",
                        success_metric="Clickable prototype ready",
                        instruction="Prioritize core features based on validation.",
                        example="Use Figma for wireframes; test with 5 users via UserTesting.com.",
                    ),
                    Task(
                        task_id="B2",
                        title="Beta Launch Prep",
                        owner="Marketing",
                        start_date="2025-12-05",
                        end_date="2025-12-15",
                        success_metric="Landing page live",
                        instruction="Create waitlist and teaser content.",
                        example="Tools: Carrd for page, Mailchimp for signups; aim for 100 leads.",
                    ),
                ],
            ),
            Phase(
                title="Phase 3: Scale & Iterate",
                tasks=[
                    Task(
                        task_id="S1",
                        title="Metrics Tracking",
                        owner="Ops",
                        start_date="2025-12-15",
                        end_date="2025-12-31",
                        success_metric="10 paying users",
                        instruction="Set up analytics and feedback loops.",
                        example="Google Analytics + Hotjar; weekly review meetings.",
                    ),
                    Task(
                        task_id="S2",
                        title="Funding Pitch",
                        owner="CEO",
                        start_date="2025-12-20",
                        end_date="2026-01-10",
                        success_metric="Pitch deck sent to 5 VCs",
                        instruction="Refine deck with traction data.",
                        example="Template: Sequoia pitch deck; highlight 20% MoM growth.",
                    ),
                ],
            ),
        ],
    )
