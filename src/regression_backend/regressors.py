"""Regression methods for model fitting."""

from typing import Union

import numpy as np

from .exceptions import InsufficientDataError, SingularMatrixError

# Minimum number of rows needed to fit a model.
MIN_TRAINING_SAMPLES = 2


class LinearRegression():
    """
    Ordinary Least Squares (OLS) linear regression with an intercept.

    Fits a linear model by minimizing the squared residuals:
        minimize ||y - Xθ||²

    where X is the feature matrix augmented with a leading column of ones.
    The solution is obtained via the normal equations:
        θ = (X^T X)^{-1} X^T y

    The system is solved with an LU factorization (`numpy.linalg.solve`)
    rather than by forming the inverse explicitly.

    Attributes:
        params: Fitted parameters of shape (n_features + 1,), intercept first.
            Read-only once fitted.

    Example:
        >>> regressor = LinearRegression()
        >>> regressor.fit(X_train, y_train)
        >>> predictions = regressor.predict(X_test)
        >>> intercept, slope = regressor.get_params()
    """

    def __init__(self):
        """Initialize the linear regression model."""
        self.params = None

    @classmethod
    def from_params(cls, params: np.ndarray) -> "LinearRegression":
        """
        Rebuild a fitted model from a stored coefficient vector.

        Args:
            params: Coefficient array of shape (n_features + 1,), intercept first

        Returns:
            model: A fitted `LinearRegression`
        """
        params = np.array(params, dtype=float)
        if params.ndim != 1 or params.size < 2:
            raise ValueError(
                f"Expected a 1-D coefficient vector with at least 2 entries, got shape {params.shape}."
            )
        model = cls()
        params.flags.writeable = False
        model.params = params
        return model

    def fit(self, X: np.ndarray, y: np.ndarray) -> "LinearRegression":
        """
        Fit the linear regression model using ordinary least squares.

        Args:
            X: Feature matrix of shape (n_samples, n_features)
            y: Target vector of shape (n_samples,)

        Returns:
            self: The fitted model

        Raises:
            InsufficientDataError: Fewer than `MIN_TRAINING_SAMPLES` samples.
            SingularMatrixError: X^T X is rank deficient (collinear features,
                or fewer independent rows than coefficients).
        """
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float)
        if X.ndim != 2:
            raise ValueError(f"X must be 2-D, got shape {X.shape}.")

        n_samples = X.shape[0]
        if n_samples < MIN_TRAINING_SAMPLES:
            raise InsufficientDataError(
                f"At least {MIN_TRAINING_SAMPLES} samples are required to fit a model, got {n_samples}."
            )
        if y.shape != (n_samples,):
            raise ValueError(
                f"Dimensions in X ({n_samples}) and y ({y.shape}) do not match."
            )

        design = _add_intercept(X)
        xtx = design.T @ design
        xty = design.T @ y

        if np.linalg.matrix_rank(xtx) < xtx.shape[0]:
            raise SingularMatrixError(
                f"Normal equations matrix is singular for {n_samples} samples "
                f"and {X.shape[1]} features."
            )

        try:
            params = np.linalg.solve(xtx, xty)
        except np.linalg.LinAlgError as e:
            raise SingularMatrixError(f"Could not solve normal equations: {e}") from e

        params.flags.writeable = False
        self.params = params
        return self

    def predict(self, X: np.ndarray) -> Union[float, np.ndarray]:
        """
        Generate predictions using the fitted model.

        Args:
            X: A single sample of shape (n_features,) or a feature matrix
                of shape (n_samples, n_features)

        Returns:
            predictions: A float for a single sample, otherwise predicted
                values of shape (n_samples,)
        """
        if self.params is None:
            raise ValueError("Model must be fitted before calling predict(). Call fit() first.")

        X = np.asarray(X, dtype=float)
        single = X.ndim == 1
        X = np.atleast_2d(X)

        if X.shape[1] != self.n_features:
            raise ValueError(
                f"Expected {self.n_features} features, got {X.shape[1]}."
            )

        predictions = np.einsum('i,ji->j', self.params, _add_intercept(X))
        if single:
            return float(predictions[0])
        return predictions

    def get_params(self) -> np.ndarray:
        """
        Get the fitted parameters.

        Returns:
            params: Coefficient array of shape (n_features + 1,), intercept first
        """
        return self.params

    @property
    def intercept(self) -> float:
        return float(self.params[0])

    @property
    def coef(self) -> np.ndarray:
        return self.params[1:]

    @property
    def n_features(self) -> int:
        return self.params.size - 1

    def __repr__(self):
        if self.params is None:
            return "LinearRegression(unfitted)"
        return f"LinearRegression(n_features={self.n_features})"


def _add_intercept(X: np.ndarray) -> np.ndarray:
    """Prepend a column of ones to a feature matrix."""
    return np.column_stack([np.ones(X.shape[0]), X])
