"""
Domain services that span more than one entity.

- bootstrap: provision profile and default role for a newly registered principal
- course_authoring: save and load whole course structures
"""
