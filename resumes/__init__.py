"""
Resumes app

Resume documents, their section tables and the editor helpers used while
authoring them.
"""
