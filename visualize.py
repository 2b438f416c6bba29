import os, argparse, logging
import matplotlib.pyplot as plt
import imageio

from acs_tsp import TSPInstance, ACOConfig, AntColonySystem


def visualize(inst, cfg, outdir, step=5):
    os.makedirs(outdir, exist_ok=True)
    solver = AntColonySystem.from_config(inst, cfg)
    _ = solver.run()

    coords = inst.coords
    frames = []
    iters = list(range(0, len(solver.history_best_tours), step))
    for it in iters:
        tour = solver.history_best_tours[it]
        L = solver.history[it]
        xs = [coords[i][0] for i in tour] + [coords[tour[0]][0]]
        ys = [coords[i][1] for i in tour] + [coords[tour[0]][1]]
        cx = [c[0] for c in coords]
        cy = [c[1] for c in coords]

        plt.figure(figsize=(5,5))
        plt.plot(cx, cy, "o")
        plt.plot(xs, ys, "-")
        plt.title(f"ACS best-so-far\niter={it+1}  length={L:.2f}")
        plt.axis("equal")
        plt.tight_layout()
        frame_path = os.path.join(outdir, f"acs_frame_{it:03d}.png")
        plt.savefig(frame_path, dpi=120, bbox_inches="tight")
        plt.close()
        frames.append(frame_path)

    if not frames:
        print("No iterations to render.")
        return None

    gif_path = os.path.join(outdir, f"{inst.name}_convergence.gif")
    with imageio.get_writer(gif_path, mode="I", duration=0.6) as writer:
        for fp in frames:
            writer.append_data(imageio.v2.imread(fp))

    print("Saved:", gif_path)
    return gif_path

def main():
    p = argparse.ArgumentParser()
    p.add_argument("--file", default=None, help="instance file (count, then 'x y' per line)")
    p.add_argument("--n", type=int, default=50, help="number of cities for a random instance")
    p.add_argument("--iters", type=int, default=60)
    p.add_argument("--ants", type=int, default=10)
    p.add_argument("--q0", type=float, default=0.9)
    p.add_argument("--beta", type=float, default=2.0)
    p.add_argument("--square", type=float, default=100.0)
    p.add_argument("--seed", type=int, default=321)
    p.add_argument("--outdir", default="viz")
    p.add_argument("--step", type=int, default=5, help="frame every k iterations")
    args = p.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(message)s")

    if args.file:
        inst = TSPInstance.from_file(args.file)
    else:
        inst = TSPInstance.random_euclidean(n=args.n, seed=args.seed, square_size=args.square, name=f"viz{args.n}")
    cfg = ACOConfig(n_ants=args.ants, n_iterations=args.iters, q0=args.q0, beta=args.beta, seed=args.seed)
    visualize(inst, cfg, args.outdir, step=args.step)

if __name__ == "__main__":
    main()
