"""Academy Scheduler package.

Recurring class scheduling for a gym/academy: series validation, recurrence
expansion, instance generation, series lifecycle and attendance upserts.
Organized by feature modules with a thin Flask controller layer over
service/repository layers.
"""
