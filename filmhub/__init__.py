"""
Backend package for the film community app.

Registration (with an LMU-first waitlist) and film submission services,
exposed through a FastAPI application and backed by a swappable
database client.
"""
