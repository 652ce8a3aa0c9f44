"""Link Bounded Context.

Combines terrain line-of-sight and RF link budget into one feasibility verdict:
- Value Objects: LinkAnalysis, LinkVerdict
- Services: analyze_link, analyze_link_between, analyze_route
"""
