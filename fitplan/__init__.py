"""FitPlan recommendation and weekly schedule backend."""
