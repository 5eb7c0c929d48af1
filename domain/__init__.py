"""Describes the lunch bot domain. Centres around the `LunchPipeline`.

What is actually hard here?

- Finding today on the menu page. The page is free text, German dates,
  days separated by dashes that also separate a day from its menu.
- Getting an image into a Slack thread. Three calls, the middle one to a
  presigned URL that sometimes hiccups.

Everything else is posting JSON somewhere. No state survives a run.
"""
