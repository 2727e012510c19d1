"""HygieneResto: HACCP hygiene tracking API and its session client."""
