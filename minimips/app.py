# minimips/app.py
from flask import Flask, request, jsonify
from flask_cors import CORS
import logging

from minimips.mips_consts import DEFAULT_MAX_STEPS, CORS_ORIGINS
from minimips.mips_errors import SimulatorError, ParseError
from minimips.mips_parser import parse_program
from minimips.mips_simulator import MipsSimulator, RecordingSink

#logging.basicConfig(level=logging.DEBUG) # Use DEBUG for development
logger = logging.getLogger(__name__)


def _get_source():
    """Returns the 'source' string from the JSON body, or None if missing."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('source'), str):
        return None
    return data['source']


def create_app(config=None):
    app = Flask(__name__)
    app.config['MAX_STEPS'] = DEFAULT_MAX_STEPS
    if config:
        app.config.update(config)
    # Adjust CORS for your frontend origin if different
    CORS(app, resources={r"/api/*": {"origins": app.config.get('CORS_ORIGINS', CORS_ORIGINS)}})

    # Shared instance for the interactive load/step endpoints
    simulator = MipsSimulator()
    app.extensions['minimips_simulator'] = simulator

    @app.route('/')
    def index():
        return "minimips simulator backend is running!"

    @app.route('/api/ping', methods=['GET'])
    def ping():
        logger.debug("Ping endpoint called")
        return jsonify({"message": "pong"})

    @app.route('/api/parse', methods=['POST'])
    def handle_parse():
        source = _get_source()
        if source is None:
            return jsonify({"errors": [{"message": "Missing 'source' key in request."}]}), 400
        try:
            program = parse_program(source)
            return jsonify(program.to_dict())
        except ParseError as e:
            logger.warning(f"Parse failed: {e}")
            return jsonify({"errors": [{"line": e.line, "message": e.reason, "text": e.text}]}), 400
        except Exception as e:
            logger.error(f"Error during parse: {e}", exc_info=True)
            return jsonify({"errors": [{"message": f"Internal server error during parse: {e}"}]}), 500

    @app.route('/api/run', methods=['POST'])
    def handle_run():
        """Runs a whole program on a throwaway simulator, returning every register snapshot."""
        source = _get_source()
        if source is None:
            return jsonify({"error": "Missing 'source' key in request."}), 400

        data = request.get_json(silent=True)
        max_steps = data.get('max_steps', app.config['MAX_STEPS'])
        if not isinstance(max_steps, int) or isinstance(max_steps, bool) or max_steps < 0:
            return jsonify({"error": "'max_steps' must be a non-negative integer."}), 400
        max_steps = min(max_steps, app.config['MAX_STEPS'])

        recorder = RecordingSink()
        run_sim = MipsSimulator(sinks=[recorder])
        try:
            state = run_sim.run(source, max_steps=max_steps)
            status = 200
        except SimulatorError as e:
            logger.warning(f"Run aborted: {e}")
            state = run_sim.get_state()
            status = 400
        except Exception as e:
            logger.error(f"Error during run: {e}", exc_info=True)
            return jsonify({"error": f"Internal server error during run: {e}"}), 500

        state["snapshots"] = recorder.snapshots
        return jsonify(state), status

    # --- Interactive Simulation Endpoints ---

    @app.route('/api/simulate/load', methods=['POST'])
    def handle_simulate_load():
        """Parses source into the shared simulator."""
        source = _get_source()
        if source is None:
            return jsonify({"error": "Missing 'source' key in request."}), 400
        try:
            simulator.load_program(source)
            logger.info("Program loaded into simulator successfully.")
            return jsonify(simulator.get_state())
        except ParseError as e:
            logger.error(f"Simulator failed to load program. Error: {e}")
            return jsonify(simulator.get_state()), 400
        except Exception as e:
            logger.error(f"Error during simulation load: {e}", exc_info=True)
            return jsonify({"error": f"Internal server error during simulation load: {e}"}), 500

    @app.route('/api/simulate/step', methods=['POST'])
    def handle_simulate_step():
        """Executes one step in the shared simulator."""
        if simulator.state not in ["loaded", "paused", "stopped"]:
            return jsonify({"error": f"Simulator not in a state that can step (state={simulator.state})."}), 400
        try:
            logger.debug("Executing simulator step...")
            state = simulator.step()
            logger.debug(f"Step completed. New state: {state.get('state')}, PC: {state.get('pc')}")
            return jsonify(state)
        except SimulatorError as e:
            logger.warning(f"Step aborted the run: {e}")
            return jsonify(simulator.get_state()), 400
        except Exception as e:
            logger.error(f"Error during simulation step: {e}", exc_info=True)
            current_state = simulator.get_state()
            current_state["error"] = current_state.get("error") or f"Internal server error during step: {e}"
            return jsonify(current_state), 500

    @app.route('/api/simulate/reset', methods=['POST'])
    def handle_simulate_reset():
        """Resets the shared simulator to its initial state (before loading)."""
        logger.info("Resetting simulator.")
        simulator.reset()
        return jsonify(simulator.get_state())

    @app.route('/api/simulate/state', methods=['GET'])
    def handle_simulate_get_state():
        """Gets the current state of the shared simulator without executing."""
        return jsonify(simulator.get_state())

    return app


app = create_app()


if __name__ == '__main__':
    # Run with `flask --app minimips.app run --port 5001` from the root directory
    app.run(debug=False, port=5001)
