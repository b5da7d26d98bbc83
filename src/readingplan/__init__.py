"""
readingplan - position engine for Bible reading plans.

Tracks where each list of a reading plan stands, works out today's
readings, and projects the plan forward into an exportable schedule.
"""
