"""
Prompt configuration for Build Together opportunity scoring
"""

SYSTEM_PROMPT = """You are an expert startup advisor specializing in quick-build SaaS opportunities for solo developers and small teams. Focus on realistic, buildable solutions that can generate recurring revenue."""

ANALYSIS_PROMPT = """Analyze this painpoint for a "Build Together" opportunity (apps under $20K to build):

Title: {title}
Description: {description}
Source: {source}
Delivery Timeline: {weeks} weeks
Tech Stack: {tech_stack}

Provide analysis scores (1-100) and detailed explanations:

1. PAINPOINT SEVERITY SCORE (1-100): How many people have this problem and how painful is it?
2. TECHNICAL FEASIBILITY (1-100): Can this be built with standard web technologies in the given timeline?
3. BUILD COMPLEXITY: Simple/Medium/Complex (based on development difficulty)
4. REVENUE POTENTIAL: Estimate monthly SaaS revenue potential ($100-$10K/month range)
5. COMPETITION GAP SCORE (1-100): How underserved is this market?
6. SAAS VIABILITY SCORE (1-100): How well does this convert to recurring revenue?

Format your response as JSON:
{{
  "painpoint_severity_score": number,
  "technical_feasibility": number,
  "build_complexity": "Simple|Medium|Complex",
  "revenue_potential_monthly": "$X-Y/month",
  "competition_gap_score": number,
  "saas_viability_score": number,
  "overall_score": number,
  "explanation": "Detailed explanation covering why this painpoint is significant, technical implementation approach, monetization strategy, market size, competitive advantages, and risk factors."
}}

The overall_score should be a weighted average: (painpoint_severity * 0.25) + (technical_feasibility * 0.20) + (competition_gap * 0.20) + (saas_viability * 0.20) + (complexity_bonus * 0.15)
where complexity_bonus = 100 for Simple, 70 for Medium, 40 for Complex"""

FALLBACK_REVENUE = "$500-2000/month"

FALLBACK_EXPLANATION = """This painpoint from {source} represents a potential Build Together opportunity. Further analysis needed to determine market viability and technical implementation details."""
