"""uilint engine kernel: structural model, configuration and lint engine."""
