"""
Leads Domain

Only the part of the lead subsystem the calendar depends on: the
{id, displayName} lookup for the entry form and lead deletion, which clears
the lead from calendar entries instead of deleting them.
"""
