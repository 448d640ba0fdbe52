#!/usr/bin/env python3
# Write a synthetic two-channel interleaved uint16 stream with triangular pulses
import argparse, random, struct


def pulse(height: int, rise: int, fall: int):
    up = [int(height * (k + 1) / rise) for k in range(rise)]
    down = [int(height * (fall - k - 1) / fall) for k in range(fall)]
    return up + down


def channel_trace(n: int, baseline: int, noise: int, every: int, height: int, seed: int):
    rnd = random.Random(seed)
    out = [baseline + rnd.randint(0, noise) for _ in range(n)]
    shape = pulse(height, 5, 20)
    for t0 in range(every // 2, n - len(shape), every):
        for k, v in enumerate(shape):
            out[t0 + k] += v
    return [min(v, 0xFFFF) for v in out]


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("out")
    ap.add_argument("--samples", type=int, default=100_000, help="samples per channel")
    ap.add_argument("--baseline", type=int, default=200)
    ap.add_argument("--noise", type=int, default=50)
    ap.add_argument("--every", type=int, default=5000, help="pulse spacing in samples")
    ap.add_argument("--height", type=int, default=3000)
    args = ap.parse_args()

    ch0 = channel_trace(args.samples, args.baseline, args.noise, args.every, args.height, 0)
    ch1 = channel_trace(args.samples, args.baseline, args.noise, args.every * 2, args.height // 2, 1)
    with open(args.out, "wb") as f:
        for a, b in zip(ch0, ch1):
            f.write(struct.pack("<HH", a, b))
    print("[ok] wrote", args.out)


if __name__ == "__main__":
    main()
