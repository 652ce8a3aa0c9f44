"""Coverage Bounded Context.

Responsible for RF propagation and LoRa link budget calculations:
- Value Objects: RFParameters, LinkBudgetResult, Recommendation
- Services: sensitivity, data_rate, free_space_path_loss, fresnel_radius,
  compute_link_budget, compute_max_range, recommend_settings
"""
