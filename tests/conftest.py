import os
import sys

import matplotlib

# Plots are rendered off-screen during tests
matplotlib.use('Agg')

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
