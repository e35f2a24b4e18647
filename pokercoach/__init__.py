"""
pokercoach: adaptive practice scheduler for poker hand-decision drills.

Decides what a learner practices next, how hard it is, which drill mix to
serve and when each answered item is due again.
"""

__version__ = "1.0.0"
