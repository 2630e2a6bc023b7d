"""
Password strength policy and Pwned Passwords breach lookup.
"""
