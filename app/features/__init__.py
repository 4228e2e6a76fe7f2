"""
Features Module - Self-contained feature units.

Each feature is a modular unit with its own logic:
- journal: Entry models, the in-memory store and timeline queries
- metrics: Streak, mood trend, growth score and trend series
- analysis: Claude analysis with keyword fallback
- suggestions: Contextual writing prompts
"""
