"""
Transient example (RC charging with a PWL-driven RL branch).

Circuit:
    V1 (5 V DC) -> R1 (1 kΩ) -> node "cap" -> C1 (1 µF) -> ground
    I1 (PWL 0 -> 10 mA over 1 ms) -> node "coil" -> L1 (10 mH) in parallel with R2 (100 Ω) -> ground

The script advances the circuit for five RC time constants and reports:
- Capacitor voltage against the analytic V·(1 - e^(-t/RC)).
- Inductor and resistor currents of the PWL-driven branch.

Run as a script to also plot the waveforms (requires matplotlib).
"""
import math

import numpy as np

from lumpsim import (
    Capacitor,
    CurrentSource,
    Inductor,
    Resistor,
    SimulationConfig,
    Stepper,
    Topology,
    VoltageSource,
)


def build() -> Topology:
    topo = Topology()
    vin = topo.new_node("vin")
    cap = topo.new_node("cap")
    coil = topo.new_node("coil")
    gnd = topo.ground

    topo.add_element(VoltageSource.dc("V1", vin.index, gnd.index, 5.0))
    topo.add_element(Resistor("R1", vin.index, cap.index, resistance=1e3))
    topo.add_element(Capacitor("C1", cap.index, gnd.index, capacitance=1e-6))
    # current enters "coil" from ground through the source
    topo.add_element(CurrentSource.pwl("I1", gnd.index, coil.index, [(0.0, 0.0), (1e-3, 10e-3)]))
    topo.add_element(Inductor("L1", coil.index, gnd.index, inductance=10e-3))
    topo.add_element(Resistor("R2", coil.index, gnd.index, resistance=100.0))
    return topo


def main(n_steps: int = 500, dt: float = 1e-5, plot: bool = False) -> Stepper:
    topo = build()
    sim = Stepper(topo, SimulationConfig(dt=dt))
    cap = topo.node_by_name("cap")
    tau = 1e3 * 1e-6

    for _ in range(n_steps):
        sim.step()
        if sim.step_count % 100 == 0:
            expected = 5.0 * (1 - math.exp(-sim.time / tau))
            print(f"t = {sim.time * 1e3:.2f} ms: V(cap) = {cap.voltage():.4f} V (analytic {expected:.4f} V)")

    print(f"I(L1) = {sim.current('L1') * 1e3:.3f} mA, I(R2) = {sim.current('R2') * 1e3:.3f} mA")
    print(sim.summary())

    if plot:
        try:
            import matplotlib.pyplot as plt

            t_ms = np.arange(sim.step_count + 1) * dt * 1e3
            fig, (ax_v, ax_i) = plt.subplots(2, 1, sharex=True, figsize=(7, 6))
            ax_v.plot(t_ms, cap.voltages.as_array(), label="V(cap)")
            ax_v.plot(t_ms, 5.0 * (1 - np.exp(-t_ms * 1e-3 / tau)), "--", label="analytic")
            ax_v.set_ylabel("Voltage [V]")
            ax_v.grid(True)
            ax_v.legend()
            for name in ("I1", "L1", "R2"):
                currents = [sim.current(name, k) for k in range(sim.step_count + 1)]
                ax_i.plot(t_ms, np.array(currents) * 1e3, label=f"I({name})")
            ax_i.set_xlabel("Time [ms]")
            ax_i.set_ylabel("Current [mA]")
            ax_i.grid(True)
            ax_i.legend()
            fig.suptitle("RC charging and PWL-driven RL branch")
            fig.tight_layout()
            plt.show()
        except ImportError:
            print("matplotlib not installed: skipping plot.")
    return sim


if __name__ == "__main__":
    main(plot=True)
