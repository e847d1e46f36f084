import numpy as np

# All vectors handled by the toolkit are single precision
FLOAT_DTYPE = np.float32

# Energy below this is treated as a silent frame by levinson_durbin
EPS = float(np.finfo(np.float32).eps)
FLOAT_MAX = float(np.finfo(np.float32).max)

# Bandwidth expansion factor for the synthesis filter denominator
LPC_CHIRP = 0.9025

# LSF stability check (radians, 8 kHz sampling)
LSF_EPS = 0.039  # 50 Hz
LSF_EPS2 = 0.0195
LSF_MIN = 0.01  # 0 Hz
LSF_MAX = 3.14  # 4000 Hz
LSF_CHECK_ITERATIONS = 2
