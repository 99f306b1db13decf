"""
Kinematics package for armtraj.
"""
