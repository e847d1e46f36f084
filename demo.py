import logging
import sys

import matplotlib.pyplot as plt
import numpy as np
from scipy.io import wavfile
from scipy.signal import freqz, get_window, lfilter

from lpc_analysis import autocorr, bandwidth_expand, interpolate, levinson_durbin, window
from lpc_constants import LPC_CHIRP
from lpc_quantizers import sort_sq
from reflection_utils import is_stable, reflection_to_lpc

FRAME_SIZE = 240  # 30 ms at 8 kHz
LPC_ORDER = 10
# Uniform codebook for the reflection coefficients
REFLECTION_CB = np.linspace(-0.98, 0.98, 64, dtype=np.float32)


def analyze_frame(frame: np.ndarray, lpc_window: np.ndarray) -> np.ndarray:
    """
    LPC analysis of one frame with quantized reflection coefficients.

    :param frame: np.ndarray - FRAME_SIZE samples of the input signal.
    :param lpc_window: np.ndarray - Analysis window, FRAME_SIZE values.
    :return: np.ndarray - Bandwidth expanded LPC coefficients built from the quantized reflection coefficients.
    """
    r = autocorr(window(frame, lpc_window), LPC_ORDER)
    _, k = levinson_durbin(r, LPC_ORDER)

    k_q = np.array([sort_sq(k_i, REFLECTION_CB)[0] for k_i in k], dtype=np.float32)
    a_q, _ = reflection_to_lpc(k_q)

    return bandwidth_expand(a_q, LPC_CHIRP)


def plot_analysis(data: np.ndarray, residual: np.ndarray, frame: np.ndarray, a: np.ndarray, samplerate: int):
    """
    Plots the prediction residual against the input and, for one frame, the
    LPC spectral envelope over the windowed frame spectrum.
    """
    w, h = freqz([1], a, worN=512, fs=samplerate)
    gain = np.sqrt(np.mean(lfilter(a, [1], frame) ** 2))
    frame_spectrum = np.abs(np.fft.rfft(frame * get_window('hann', FRAME_SIZE), 1024))

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8))

    ax1.plot(data, label='Input', alpha=0.6)
    ax1.plot(residual, label='LPC residual', alpha=0.8)
    ax1.set_xlabel('Sample')
    ax1.set_ylabel('Amplitude')
    ax1.set_title(f'Prediction residual (order {LPC_ORDER})')
    ax1.legend()

    ax2.plot(np.fft.rfftfreq(1024, 1 / samplerate), 20 * np.log10(frame_spectrum + 1e-9), label='Frame spectrum', alpha=0.6)
    ax2.plot(w, 20 * np.log10(gain * np.sqrt(FRAME_SIZE) * np.abs(h) + 1e-9), label='LPC envelope')
    ax2.set_xlabel('Frequency (Hz)')
    ax2.set_ylabel('Magnitude (dB)')
    ax2.set_title('Spectral envelope of the loudest frame')
    ax2.legend()

    plt.tight_layout()
    plt.show()


def process_wav_file(input_file: str, output_file: str):
    samplerate, data = wavfile.read(input_file)
    # Ensure mono audio for simplicity
    if data.ndim > 1:
        data = data[:, 0]
    data = data.astype(np.float32)

    if len(data) % FRAME_SIZE != 0:
        padding_length = FRAME_SIZE - (len(data) % FRAME_SIZE)
        data = np.pad(data, (0, padding_length), mode='constant', constant_values=0)

    lpc_window = get_window('hann', FRAME_SIZE).astype(np.float32)

    residual_signal = []
    reconstructed_signal = []
    analysis_zi = np.zeros(LPC_ORDER)
    synthesis_zi = np.zeros(LPC_ORDER)
    prev_a = None
    loudest = (-1.0, None, None)

    for i in range(0, len(data) // FRAME_SIZE):
        frame = data[i * FRAME_SIZE:(i + 1) * FRAME_SIZE]
        a = analyze_frame(frame, lpc_window)

        # Smooth the filter across the frame boundary
        if prev_a is not None:
            a_mid = interpolate(a, prev_a, 0.5)
            if is_stable(a_mid):
                a = a_mid
        prev_a = a

        residual, analysis_zi = lfilter(a, [1], frame, zi=analysis_zi)
        reconstructed_frame, synthesis_zi = lfilter([1], a, residual, zi=synthesis_zi)
        residual_signal.extend(residual)
        reconstructed_signal.extend(reconstructed_frame)

        energy = float(np.dot(frame, frame))
        if energy > loudest[0]:
            loudest = (energy, frame, a)

    reconstructed_signal = np.clip(reconstructed_signal, -32768, 32767).astype(np.int16)
    wavfile.write(output_file, samplerate, reconstructed_signal)

    _, frame, a = loudest
    plot_analysis(data, np.array(residual_signal), frame, a, samplerate)


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    input_file = sys.argv[1] if len(sys.argv) > 1 else 'input.wav'
    output_file = sys.argv[2] if len(sys.argv) > 2 else 'output.wav'
    process_wav_file(input_file, output_file)
