"""
Recommendation engine shared by the restaurant, movie and TV show domains.

Responsibilities:
- Model preferences as explicit constraints.
- Describe each domain's hard filters and soft bonuses as a rules descriptor.
- Score and rank candidate entities.
- Assemble recommendations in phases with exclusion and de-duplication.
"""
