"""Pure derivations over buffer snapshots: statistics, scores and classifications."""
